"""
Read-only content catalogs shared by every scoring and recommendation run.

Modules
-------
lesson_catalog : LessonCatalog (immutable, indexed by lesson_id) +
                 load_lesson_catalog() + the process-wide one-shot
                 init_lesson_catalog() / get_lesson_catalog() pair.
question_bank  : QuestionBank (immutable, indexed by question_id) +
                 load_question_bank() + seeded select_questions().
"""


class CatalogError(ValueError):
    """A catalog file is malformed or a catalog was initialised twice."""


class CatalogNotInitializedError(RuntimeError):
    """The process-wide catalog was read before startup finished loading it."""
