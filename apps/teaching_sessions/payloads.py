"""
Variantes de données propres à chaque type de séance.

Une séance ne porte que les champs de son type d'origine : la complétude se
vérifie par variante (voir policies.is_complete).
"""
from dataclasses import dataclass


def _filled(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


@dataclass(frozen=True)
class RcdPayload:
    """Remplacement de courte durée : qui est remplacé, dans quelle classe."""
    prefix: str = ''
    last_name: str = ''
    first_name: str = ''
    class_name: str = ''
    subject: str = ''

    required_fields = ('last_name', 'class_name')

    def missing_fields(self) -> list[str]:
        return [name for name in self.required_fields if not _filled(getattr(self, name))]


@dataclass(frozen=True)
class DevoirsFaitsPayload:
    student_count: int | None = None
    grade_level: str = ''

    required_fields = ('student_count', 'grade_level')

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.student_count or self.student_count < 1:
            missing.append('student_count')
        if not _filled(self.grade_level):
            missing.append('grade_level')
        return missing


@dataclass(frozen=True)
class DescriptionPayload:
    """HSE et Autre : une description libre suffit."""
    description: str = ''

    required_fields = ('description',)

    def missing_fields(self) -> list[str]:
        return [] if _filled(self.description) else ['description']


# Champs de modèle correspondant à chaque champ de variante
MODEL_FIELDS = {
    'prefix': 'replaced_teacher_prefix',
    'last_name': 'replaced_teacher_last_name',
    'first_name': 'replaced_teacher_first_name',
    'class_name': 'class_name',
    'subject': 'subject',
    'student_count': 'student_count',
    'grade_level': 'grade_level',
    'description': 'description',
}
