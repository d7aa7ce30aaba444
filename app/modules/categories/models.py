# Supabase tables: categories, subcategories, sub_subcategories
# Three-level hierarchy; templates point at up to one node per level

"""
Expected Supabase table structure:

categories:
- id: uuid (primary key)
- name: text
- slug: text (unique)
- description: text (nullable)
- icon: text (nullable)
- created_at, updated_at: timestamp

subcategories:
- id: uuid (primary key)
- category_id: uuid (references categories)
- name, slug, description: text
- created_at, updated_at: timestamp

sub_subcategories:
- id: uuid (primary key)
- subcategory_id: uuid (references subcategories)
- name, slug, description: text
- created_at, updated_at: timestamp

templates.category_id / subcategory_id / sub_subcategory_id reference these rows.
"""
