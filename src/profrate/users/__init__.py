"""
profrate.users

User administration (create/list/update/remove) and the bootstrap administrator.
"""
