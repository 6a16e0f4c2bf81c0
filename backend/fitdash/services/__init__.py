"""
Services module - Application business logic layer.

Modules:
- analytics: Streaks, calorie metrics, chart shaping
- dashboard: Session state, optimistic actions, reconciliation
- store: Record store backends
- identity: User identity
- adapter: Text-generation provider abstraction
- insights: AI insight requests and parsing
- external: Report export
"""
