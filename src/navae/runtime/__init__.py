"""
Runtime wiring: control state, context and the assistant service.
"""
