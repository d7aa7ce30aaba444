# Supabase tables: creator_shops, creator_followers
# Vendor storefronts and who follows them

"""
creator_shops:
- id: uuid (primary key)
- user_id: uuid (owner, references auth.users)
- slug: text (unique, storefront URL)
- name: text
- description: text (nullable)
- direct_upload_enabled: boolean (admin toggle)
- bank_account_name, bank_account_number, bank_ifsc, bank_upi_id: text (nullable)
- created_at: timestamp

creator_followers:
- id: uuid (primary key)
- creator_shop_id: uuid (references creator_shops)
- user_id: uuid
- created_at: timestamp
"""
