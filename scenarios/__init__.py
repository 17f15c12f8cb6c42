"""
Scenario files for the todo application. Each sNN_*.py module holds
scenario_* coroutines run by run_scenarios.py.
"""
