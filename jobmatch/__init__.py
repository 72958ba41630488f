"""
JobMatch - Resume/job matching engine

This package:
1. Validates resume profiles and job postings
2. Scores a resume against a job with a deterministic keyword heuristic
3. Optionally delegates scoring to an external LLM analysis
4. Scores batches with rate limiting, preserving input order
5. Summarizes and compares scored candidates
"""

__version__ = "1.0.0"
__author__ = "JobMatch"
