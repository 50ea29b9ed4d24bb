"""Exams and practice exercises generated by the LLM."""
