"""Saved summaries, exams and exercises, kept per user role."""
