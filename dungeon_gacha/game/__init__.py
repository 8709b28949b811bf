"""Game layer: battles, dungeons, expeditions, content and progression."""
