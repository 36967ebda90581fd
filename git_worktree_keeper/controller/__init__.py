"""State machine and command protocol of the interactive app.

This package holds the pure parts of the app:
- state: The application state and one view per mode
- commands: Operations requested by the state machine
- messages: Input events and command completions
- transitions: The transition function
- dispatcher: Runs commands against the WorktreeKeeper facade
"""
