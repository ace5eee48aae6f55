"""
Application Layer

Contains the player engine services, catalog queries and port interfaces.
This layer orchestrates domain objects and the external collaborators.

Structure:
- services/: Command bus, notification hub and the playback controller
- queries/: Request/response catalog reads consumed directly by callers
- interfaces/: Port interfaces for the catalog and the audio backend
"""
