# Supabase Auth + admins allow-list
# Identity comes from Supabase Auth (auth.users); this service never issues tokens.

"""
Expected Supabase table structure:

admins:
- user_id: uuid (primary key, foreign key to auth.users.id)
- created_at: timestamp (default: now())

Authorization is a row-existence check: a user is an admin when a row with
their id exists in admins. There are no roles or claims.
"""
