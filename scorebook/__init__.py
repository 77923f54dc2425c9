"""
Limited-overs Cricket Scoring Engine

Scores a match ball-by-ball from an append-only ledger of deliveries and
derives everything downstream: over and innings completion, bowler
eligibility, fall of wickets, undo/redo, match result and the standout
performer.
"""

__version__ = "0.1.0"
