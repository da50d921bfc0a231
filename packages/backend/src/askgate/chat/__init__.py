"""Conversation proxy.

Takes a question plus the client's turn history, reshapes the history
into Gemini's content format, makes one stateless chat call and either
returns the answer text or classifies the upstream failure into an
askgate.errors type.
"""
