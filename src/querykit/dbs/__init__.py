"""Connection implementations.

Import the concrete module you need; ``postgres`` requires psycopg2.
"""
