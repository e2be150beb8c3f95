"""
Client side of the remote log service: event model, validation, sinks,
auth token provider and the fire-and-forget AppLogger.
"""
