"""
Command-line scripts.

- run.py: Run the swarm on the Rosenbrock function
"""
