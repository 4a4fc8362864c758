"""ffprogress: structured events from ffmpeg's banner and progress output."""
