"""
PAC Voice Control: hands-free input for the Pokémon Auto Chess shop calculator.

Architecture: Confidence Gate → Numeral Normalizer → Tokenizer → Chunk Parser → Dispatcher
Philosophy:  Every spoken word is claimed by at most one command.
"""

__version__ = "1.0.0"
