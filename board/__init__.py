"""board/ -- Bulletin board posts, the business collaborator of the auth gate.

Layer rule: board/ imports only stdlib, third-party libraries and core/.
It receives the authenticated principal from api/ routes and never
consults the session registry itself.
"""
