"""Desktop window wiring the matching-lines commands into menus."""
