"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Audio (VLC playback, timer-driven simulated playback)
- Catalog (HTTP client for the beat store API, demo catalog)
- Console (now-playing view)
- Scheduling (asyncio timers)
"""
