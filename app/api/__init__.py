"""
API blueprints for the Brewline platform.
"""
