"""
Pydantic models for the Tourisma entities and API payloads.

The same models describe the records kept in the in-memory store and
the bodies returned by the API; request payloads get their own
``*Create`` / ``*Update`` models so clients cannot set derived fields
such as ratings or prices.
"""
