"""Core building blocks shared by the schema, inference and query layers."""
