"""
Scoring engine: turns a quiz submission plus its question set into a
score breakdown, a skill-gap analysis and gamification rewards.

Modules
-------
metrics : basic / speed / consistency / composite scores + category,
          pure functions, no I/O.
skills  : per-skill aggregation -> Strength and Opportunity lists.
rewards : XP, badges, achievements and streaks for one submission.
engine  : ScoringEngine (config bound at construction) + score_submission().
"""
