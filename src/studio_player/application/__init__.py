"""
Application Layer

Contains the playback controller and the ports it drives.

Structure:
- services/: Application services (the playback queue controller)
- interfaces/: Port interfaces for infrastructure adapters
"""
