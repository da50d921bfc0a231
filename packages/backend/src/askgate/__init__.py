"""askgate — auth-gated conversational proxy for Gemini.

Users register and log in for bearer tokens; questions plus their
prior turns are forwarded to Google's generative-language API and the
answer is handed back.
"""

__version__ = "0.1.0"
