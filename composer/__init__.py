"""Contract composition workflow.

Binds user input against a contract type schema, drives a draft through
generation, editing and saving, and exposes the pieces the command line
and any other front end build on:

- ``composer.binder``: validated generation requests
- ``composer.lifecycle``: the draft state machine
- ``composer.fields``: schema-driven form fields
- ``composer.session``: the session credential and its store
"""
