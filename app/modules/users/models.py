# Supabase Auth: auth.users
# Admin user management works against Supabase Auth directly; there is no profile table

"""
Fields read from auth.users through the admin API:
- id: uuid
- email: text
- created_at: timestamp
- user_metadata: jsonb
    - first_name: text (nullable)
    - last_name: text (nullable)
"""
