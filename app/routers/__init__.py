# Flask blueprints
