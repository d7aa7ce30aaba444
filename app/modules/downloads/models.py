# Supabase tables: downloads, free_downloads
# Append-only download event logs used for entitlement and analytics

"""
downloads:
- id: uuid (primary key)
- user_id: uuid
- template_slug: text
- subscription_id: uuid (nullable)
- downloaded_at: timestamp
- created_at: timestamp

free_downloads:
- id: uuid (primary key)
- user_id: uuid
- template_slug: text
- downloaded_at: timestamp
- created_at: timestamp
"""
