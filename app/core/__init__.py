# Configuration, errors, caller identity and shared helpers
