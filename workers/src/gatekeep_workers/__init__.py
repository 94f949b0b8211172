"""Worker runner for the Gatekeep Temporal components.

Each deployed service runs the same image with a different CLI argument
to select which component's activities to expose on that worker.
"""
