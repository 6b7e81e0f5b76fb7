"""
Application Layer

Contains use cases and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: command routing, context and reply DTOs
- services/: work queue, playback queue manager and session registry
- interfaces/: Port interfaces for infrastructure adapters
"""
