"""
Authentication for the web application.

Design goals:
- Three entry flows (register, local login, Google delegated login) converge on one
  artifact: a signed session token carried in an HttpOnly cookie.
- Every component receives an explicit `AuthConfig`; nothing reads ambient globals.
- Failures travel as `Result` values and are rendered at the HTTP boundary.
"""
