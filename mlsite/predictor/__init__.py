"""Prediction application.

Request handlers, the model loader, templates and static assets live in
this package.  It is separated from the project-level modules so that the
model dependencies stay out of configuration and startup code.
"""
