"""
Service de checkout des kits de recrutement (FastAPI + Supabase + Stripe).
"""
