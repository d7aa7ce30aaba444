# Supabase table: templates
# A sellable digital asset (video template, music track, sound effect, photo, 3D model)

"""
Expected Supabase table structure:
- slug: text (unique)
- name, subtitle, description: text
- price: numeric (0 = free download)
- img, video: text (preview URLs; Supabase public URL, previews/ object path or R2 previews domain URL)
- video_path, thumbnail_path, audio_preview_path, model_3d_path, preview_path: text (nullable)
- source_path: text (object path in the private templatesource bucket)
- features, software, plugins, tags: text[]
- is_featured: boolean
- is_limited_offer: boolean
- limited_offer_duration_days: integer
- limited_offer_start_date: timestamp
- category_id, subcategory_id, sub_subcategory_id: uuid (nullable)
- creator_shop_id: uuid (nullable, references creator_shops)
- vendor_name: text (nullable)
- status: text ('pending' | 'approved' | 'rejected')
- review_note: text (nullable)
- reviewed_at: timestamp (nullable)
- meta_title, meta_description: text (nullable)
- created_at: timestamp
"""
