"""
Registre central des routers (API, admin, health).
- API: checkout + webhook Stripe, statut de commande, kits
- Admin: tableau de bord des commandes
- Health: health_router
"""
from fastapi import FastAPI
from hiringkit.payments import views as payments_views
from hiringkit.orders import views as orders_views
from hiringkit.kits import views as kits_views
from hiringkit.admin.views import router as admin_router
from hiringkit.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """
    Agrège tous les routers de l'application.
    L'ordre n'a pas d'impact sauf conflits de chemins (évités par préfixes).
    """
    # API
    app.include_router(payments_views.router)
    app.include_router(orders_views.router)
    app.include_router(kits_views.router)
    # Admin
    app.include_router(admin_router)
    # Health & monitoring
    app.include_router(health_router)
