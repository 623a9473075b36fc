"""
Services layer: e-mail delivery and the notifications built on top of it.
"""
