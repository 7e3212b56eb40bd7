"""
Operator Scripts
Run from the repo root, e.g. python -m scripts.migrate
"""
