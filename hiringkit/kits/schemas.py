"""
Schéma des données d'intake d'un kit (champs saisis par l'utilisateur avant génération).
- IntakeData: schéma complet (tous les champs obligatoires présents).
- IntakePatch: même schéma en mode partiel (tous les champs optionnels, contraintes conservées).
- validate_intake: validation complète ou partielle retournant un ValidationResult structuré.
Les clés inconnues sont ignorées par la validation (elles ne la font pas échouer).
"""
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError

from hiringkit.utils.responses import format_validation_errors

Text100 = Annotated[str, StringConstraints(min_length=1, max_length=100)]
Text200 = Annotated[str, StringConstraints(min_length=1, max_length=200)]
Text300 = Annotated[str, StringConstraints(min_length=1, max_length=300)]
Text500 = Annotated[str, StringConstraints(min_length=1, max_length=500)]
Text1000 = Annotated[str, StringConstraints(min_length=1, max_length=1000)]
Title = Annotated[str, StringConstraints(min_length=2, max_length=100)]
Mission = Annotated[str, StringConstraints(min_length=10, max_length=1000)]

EmploymentType = Literal["full_time", "part_time", "contract", "internship"]

class SuccessMetrics(BaseModel):
    d90: Text300
    d180: Text300
    d365: Text300

class IntakeData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role_title: Title
    organization: Title
    reports_to: Optional[Text100] = None
    department: Optional[Text100] = None
    location: Optional[Text100] = None
    employment_type: Optional[EmploymentType] = None
    mission: Mission
    outcomes: Annotated[List[Text200], Field(min_length=1, max_length=10)]
    responsibilities: Annotated[List[Text200], Field(min_length=1, max_length=15)]
    core_skills: Annotated[List[Text100], Field(min_length=1, max_length=15)]
    behavioral_competencies: Annotated[List[Text100], Field(min_length=1, max_length=10)]
    values: Annotated[List[Text100], Field(min_length=1, max_length=10)]
    success_metrics: SuccessMetrics
    job_post_intro: Optional[Text500] = None
    job_post_summary: Optional[Text1000] = None
    must_have: Annotated[List[Text200], Field(min_length=1, max_length=15)]
    nice_to_have: Annotated[List[Text200], Field(min_length=0, max_length=15)]
    compensation: Optional[Text500] = None
    how_to_apply: Optional[Text500] = None
    work_sample_scenario: Optional[Text1000] = None

class IntakePatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role_title: Optional[Title] = None
    organization: Optional[Title] = None
    reports_to: Optional[Text100] = None
    department: Optional[Text100] = None
    location: Optional[Text100] = None
    employment_type: Optional[EmploymentType] = None
    mission: Optional[Mission] = None
    outcomes: Optional[Annotated[List[Text200], Field(min_length=1, max_length=10)]] = None
    responsibilities: Optional[Annotated[List[Text200], Field(min_length=1, max_length=15)]] = None
    core_skills: Optional[Annotated[List[Text100], Field(min_length=1, max_length=15)]] = None
    behavioral_competencies: Optional[Annotated[List[Text100], Field(min_length=1, max_length=10)]] = None
    values: Optional[Annotated[List[Text100], Field(min_length=1, max_length=10)]] = None
    success_metrics: Optional[SuccessMetrics] = None
    job_post_intro: Optional[Text500] = None
    job_post_summary: Optional[Text1000] = None
    must_have: Optional[Annotated[List[Text200], Field(min_length=1, max_length=15)]] = None
    nice_to_have: Optional[Annotated[List[Text200], Field(min_length=0, max_length=15)]] = None
    compensation: Optional[Text500] = None
    how_to_apply: Optional[Text500] = None
    work_sample_scenario: Optional[Text1000] = None

    def provided_fields(self) -> Dict[str, Any]:
        """Champs effectivement fournis (hors null), sérialisés en types JSON."""
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)

class UpdateInputsRequest(BaseModel):
    field_updates: IntakePatch

class ValidationResult:
    def __init__(self, ok: bool, data: Optional[Dict[str, Any]] = None, errors: Optional[List[Dict[str, str]]] = None):
        self.ok = ok
        self.data = data
        self.errors = errors or []

    def __bool__(self):
        return self.ok

    def __repr__(self):
        return f"ValidationResult(ok={self.ok}, errors={self.errors})"

def validate_intake(value: Any, partial: bool = False) -> ValidationResult:
    """
    Valide une valeur contre le schéma d'intake.
    - partial=True: seuls les champs présents sont contrôlés (équivalent IntakeData.partial()).
    - Retour: ValidationResult(ok, data normalisée, errors [{path, message, code}]).
    """
    model = IntakePatch if partial else IntakeData
    try:
        parsed = model.model_validate(value)
    except ValidationError as e:
        return ValidationResult(False, errors=format_validation_errors(e.errors()))
    return ValidationResult(True, data=parsed.model_dump(mode="json", exclude_unset=partial, exclude_none=True))
