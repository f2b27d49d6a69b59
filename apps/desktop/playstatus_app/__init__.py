"""Desktop app and CLI for the playback status renderer."""
