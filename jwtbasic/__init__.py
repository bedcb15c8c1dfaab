"""JWTBasic: user registration and login API issuing signed JSON Web Tokens."""

__version__ = "0.1.0"
