# Utilities: configuration, canonical schema, field extraction
