"""Terminal front-ends for zone_watch."""
