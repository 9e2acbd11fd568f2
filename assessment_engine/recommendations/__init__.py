"""
Recommendation engine: filters and ranks the lesson catalog against a
learner's skill gaps, age group and target difficulty.

Modules
-------
scorer     : LessonScoreComponents dataclass + compute_lesson_score()
             + determine_priority() + build_reasons(), all pure.
ranker     : RecommendationCriteria + ScoredLesson + filter_lessons()
             + rank_lessons() + recommend() + the opportunity-driven
             criteria_for_opportunities() / recommend_for_opportunities().
sequencing : build_learning_path() with a swappable lesson-selection
             strategy (greedy set cover by default).
"""
