"""Prompt, tag and description library for generated sound effects, keyed on sound type."""
from typing import Dict, List

PROMPTS: Dict[str, List[str]] = {
    "whoosh": [
        "Fast whoosh sound effect, quick movement through air",
        "Slow whoosh sound effect, gentle movement through air",
        "Whoosh sound effect with impact, dramatic movement",
        "Whoosh sound effect, spinning movement through air",
        "Whoosh sound effect, rhythmic movement pattern",
    ],
    "camera-shutter": [
        "Camera shutter click sound, crisp DSLR shutter release",
        "Mechanical camera shutter sound, vintage film camera click",
        "Fast camera shutter burst, continuous shooting mode",
        "Camera shutter with mirror slap, professional DSLR sound",
        "Soft camera shutter click, mirrorless camera sound",
    ],
    "camera-sounds": [
        "Camera focusing sound, autofocus motor whir",
        "Camera lens zoom sound, smooth zoom mechanism",
        "Camera power on sound, electronic startup beep",
        "Camera flash charging sound, capacitor charging whine",
    ],
    "footsteps": [
        "Footsteps on concrete, slow walking pace urban street",
        "Footsteps on gravel, crunching stones outdoor path",
        "Footsteps on wood floor, indoor wooden hallway creaking",
        "Running footsteps on pavement, fast chase scene",
    ],
    "door-sounds": [
        "Door creaking open, old wooden door horror suspense",
        "Door slam shut, heavy wooden door dramatic impact",
        "Door knock, polite rhythmic knocking on wood",
        "Door lock clicking, key turning in lock mechanism",
    ],
    "ambient": [
        "City ambient sound, urban traffic distant sirens",
        "Forest ambient, birds chirping wind rustling leaves",
        "Office ambient, typing keyboards air conditioning hum",
        "Coffee shop ambient, murmuring voices clinking cups",
    ],
    "impact": [
        "Punch impact sound, fist hitting body fight scene",
        "Explosion impact, distant bomb blast rumble",
        "Glass breaking, shattering window dramatic",
        "Metal impact, sword clash clanging metal",
    ],
    "suspense": [
        "Tension drone, building suspense low frequency",
        "Heartbeat sound, slow tense pounding rhythm",
        "Clock ticking, suspenseful countdown timer",
        "Wind howling, eerie atmospheric tension",
    ],
    "nature": [
        "Thunder rolling, distant storm approaching",
        "Rain heavy, downpour storm dramatic",
        "Wind strong, gusty outdoor atmospheric",
        "Fire crackling, campfire burning flames",
    ],
    "technology": [
        "Phone notification, message alert ding",
        "Computer startup, operating system boot sound",
        "Keyboard typing, mechanical keyboard clicks",
        "Mouse click, computer mouse button press",
    ],
    "transitions": [
        "Swoosh transition, fast movement scene change",
        "Glitch transition, digital distortion switch",
        "Whoosh flyby, fast object passing by",
        "Cinematic boom, dramatic scene transition",
    ],
    "vehicles": [
        "Car engine starting, vehicle ignition motor",
        "Car driving by, vehicle pass doppler effect",
        "Motorcycle revving, bike engine acceleration",
        "Helicopter overhead, chopper flyover rotating",
    ],
    "horror": [
        "Scream terror, blood curdling horror scream",
        "Monster growl, creature beast threatening",
        "Zombie moan, undead groaning horror",
        "Ghost whisper, ethereal supernatural voice",
    ],
    "glitch": [
        "Digital glitch sound, electronic distortion static",
        "Glitch stutter effect, broken signal interference",
        "Data corruption sound, digital malfunction noise",
        "VHS glitch, retro tape distortion artifact",
    ],
    "keyboard": [
        "Mechanical keyboard typing, cherry mx switch clicks",
        "Keyboard key press, single keystroke click",
        "Keyboard typing fast, rapid typing sound",
        "Spacebar press, large key thump sound",
    ],
    "typing": [
        "Typing on keyboard, office work ambient",
        "Fast typing, professional typist speed",
        "Slow typing, one finger hunt and peck",
        "Typing with mouse clicks, computer work",
    ],
    "pop": [
        "Bubble pop sound, soap bubble burst",
        "Pop sound effect, cartoon pop noise",
        "Balloon pop, party balloon burst",
        "Cork pop, champagne bottle opening",
    ],
    "paper": [
        "Paper rustling, document shuffling sound",
        "Paper tear, ripping paper apart",
        "Paper crumple, crushing paper ball",
        "Page turn, book page flip sound",
    ],
    "highlighter": [
        "Highlighter marker, squeaky marker on paper",
        "Marker writing, felt tip pen drawing",
        "Highlighter stroke, marking text sound",
        "Dry erase marker, whiteboard writing",
    ],
    "notification": [
        "Phone notification ding, message alert",
        "Email notification, inbox alert sound",
        "App notification, push alert chime",
        "Success notification, positive confirmation ding",
    ],
    "ui-click": [
        "Button click, UI button press sound",
        "Toggle switch, on off switch click",
        "Checkbox tick, selection confirmation",
        "Dropdown menu, select menu opening",
    ],
    "writing": [
        "Pen writing, ballpoint pen on paper",
        "Pencil writing, graphite pencil scratch",
        "Fountain pen, elegant pen on paper",
        "Pencil erasing, rubber eraser on paper",
    ],
    "coins": [
        "Coin drop, single coin falling clink",
        "Coins jingling, pocket change rattling",
        "Coin flip, flipping coin spinning",
        "Coin insert, vending machine coin slot",
    ],
    "swoosh": [
        "Fast swoosh, quick movement air sound",
        "Sword swoosh, blade cutting through air",
        "Cape swoosh, fabric flowing movement",
        "Magic swoosh, spell casting movement",
    ],
    "gun-shots": [
        "Gun shot, pistol firing loud bang",
        "Rifle shot, military assault rifle",
        "Shotgun blast, close range boom",
        "Sniper shot, long distance precision",
    ],
    "human-sounds": [
        "Scream loud, terror fear scream",
        "Burp loud, stomach gas release",
        "Coughing, throat irritation",
    ],
    "glass-breaking": [
        "Glass shatter, window breaking crash",
        "Glass bottle smash, liquid spill",
        "Windshield crack, car accident",
        "Glass cup breaking, kitchen accident",
    ],
    "fire": [
        "Fire crackling, campfire burning",
        "Fire roar, intense flame",
        "Fire extinguisher, foam spray",
        "Candle flame, small burning",
    ],
    "thunder": [
        "Thunder clap, lightning strike",
        "Thunder rumble, distant storm",
        "Thunder crack, electrical discharge",
        "Thunder boom, loud storm",
    ],
    "train": [
        "Train whistle, locomotive warning",
        "Train horn, railway crossing",
        "Train chugging, steam engine",
        "Train wheels, steel track",
    ],
    "beats": [
        "Drum beat, bass drum loud",
        "Percussion beat, rhythmic pattern",
        "Electronic beat, synth rhythm",
        "Hip hop beat, urban rhythm",
    ],
    "impacts": [
        "Impact crash, loud collision",
        "Punch impact, fist hitting",
        "Metal impact, heavy crash",
        "Explosion impact, boom crash",
    ],
    "home-things": [
        "Clock ticking, steady timekeeping rhythm",
        "Chair creaking, wooden office chair movement",
        "Chair squeaking, metal chair adjustment",
        "Plastic crinkling, wrapper paper rustling",
    ],
    "mouse-clicks": [
        "Mouse click, computer mouse button press",
        "Mouse double click, rapid button press",
        "Mouse right click, context menu button",
        "Mouse scroll, wheel scrolling sound",
    ],
    "water-sounds": [
        "Water dripping, steady drop sound",
        "Water flowing, gentle stream sound",
        "Water splashing, liquid impact",
        "Ocean waves, surf crashing",
    ],
}

TAGS: Dict[str, List[str]] = {
    "whoosh": ["whoosh", "transition", "movement", "swish", "air", "swoosh", "sound effect", "sfx", "video editing"],
    "camera-shutter": ["camera", "shutter", "click", "photography", "dslr", "capture", "photo", "snap", "sound effect"],
    "camera-sounds": ["camera", "photography", "lens", "focus", "autofocus", "zoom", "equipment", "sound effect"],
    "footsteps": ["footsteps", "walking", "running", "steps", "foley", "movement", "shoes", "floor", "short film", "sfx"],
    "door-sounds": ["door", "creak", "slam", "knock", "lock", "opening", "closing", "foley", "short film", "sfx", "horror"],
    "ambient": ["ambient", "atmosphere", "background", "environment", "city", "nature", "room tone", "short film", "sfx"],
    "impact": ["impact", "hit", "punch", "explosion", "crash", "collision", "action", "fight", "short film", "sfx"],
    "suspense": ["suspense", "tension", "thriller", "horror", "dramatic", "scary", "eerie", "short film", "sfx"],
    "nature": ["nature", "outdoor", "weather", "rain", "thunder", "wind", "forest", "water", "short film", "sfx"],
    "technology": ["technology", "phone", "computer", "notification", "ui", "interface", "digital", "electronic", "sfx"],
    "transitions": ["transition", "swoosh", "whoosh", "cinematic", "scene change", "video editing", "youtube", "sfx"],
    "vehicles": ["vehicle", "car", "motorcycle", "engine", "traffic", "transportation", "driving", "short film", "sfx"],
    "horror": ["horror", "scary", "monster", "scream", "ghost", "creepy", "thriller", "halloween", "short film", "sfx"],
    "glitch": ["glitch", "digital", "distortion", "static", "error", "vhs", "retro", "cyberpunk", "transition", "sfx"],
    "keyboard": ["keyboard", "typing", "mechanical", "keys", "computer", "office", "work", "asmr", "sfx", "foley"],
    "typing": ["typing", "keyboard", "computer", "office", "work", "writing", "ambient", "asmr", "sfx", "foley"],
    "pop": ["pop", "bubble", "burst", "cartoon", "ui", "notification", "animation", "fun", "sfx", "motion graphics"],
    "paper": ["paper", "page", "document", "rustling", "tear", "crumple", "office", "foley", "sfx", "asmr", "book"],
    "highlighter": ["highlighter", "marker", "writing", "drawing", "pen", "office", "school", "asmr", "sfx", "foley"],
    "notification": ["notification", "alert", "ding", "phone", "app", "message", "ui", "ux", "sfx", "mobile"],
    "ui-click": ["ui", "click", "button", "interface", "app", "web", "mobile", "ux", "sfx", "interaction"],
    "writing": ["writing", "pen", "pencil", "paper", "drawing", "office", "school", "asmr", "sfx", "foley"],
    "coins": ["coins", "money", "cash", "clink", "jingle", "game", "arcade", "collect", "sfx", "reward"],
    "swoosh": ["swoosh", "swish", "movement", "fast", "air", "action", "sport", "transition", "sfx", "cinematic"],
    "gun-shots": ["gun", "shot", "firearms", "weapon", "pistol", "rifle", "explosion", "action", "war", "sfx"],
    "human-sounds": ["human", "scream", "burp", "cough", "sneeze", "laugh", "cry", "voice", "sfx", "foley"],
    "glass-breaking": ["glass", "breaking", "shatter", "crash", "smash", "accident", "impact", "sfx", "foley"],
    "fire": ["fire", "flame", "crackling", "burning", "campfire", "torch", "flames", "sfx", "atmosphere", "ambient"],
    "thunder": ["thunder", "storm", "lightning", "weather", "rain", "stormy", "nature", "sfx", "atmosphere"],
    "train": ["train", "railway", "whistle", "horn", "locomotive", "transportation", "travel", "sfx", "ambience"],
    "beats": ["beat", "drum", "rhythm", "percussion", "music", "bass", "drop", "electronic", "hip hop", "sfx"],
    "impacts": ["impact", "crash", "hit", "punch", "explosion", "collision", "strike", "sfx", "action"],
    "home-things": ["home", "household", "clock", "chair", "plastic", "office", "ambient", "everyday", "sfx", "foley"],
    "mouse-clicks": ["mouse", "click", "computer", "button", "ui", "interface", "office", "sfx", "foley"],
    "water-sounds": ["water", "drip", "flow", "splash", "ocean", "rain", "liquid", "nature", "ambient", "sfx"],
}

DESCRIPTIONS: Dict[str, str] = {
    "whoosh": "perfect for transitions, movements, and action sequences in videos and films",
    "camera-shutter": "ideal for photography apps, video transitions, vlogs, and multimedia projects",
    "camera-sounds": "perfect for photography-related content, camera tutorials, and UI interfaces",
    "footsteps": "essential foley sound for short films, movies, and video productions",
    "door-sounds": "versatile door foley effects for short films, horror movies, and dramatic scenes",
    "ambient": "atmospheric background sounds for establishing shots in short films and documentaries",
    "impact": "powerful impact sounds for action scenes, fight sequences, and dramatic moments",
    "suspense": "tension-building sounds for thriller and horror short films",
    "nature": "natural environmental sounds for outdoor scenes and atmospheric backgrounds in films",
    "technology": "modern digital sounds for UI, notifications, and tech-related scenes",
    "transitions": "professional transition sounds for video editing, YouTube videos, and scene changes",
    "vehicles": "realistic vehicle sounds for car chases, travel scenes, and transportation sequences",
    "horror": "terrifying horror sounds for scary movies, Halloween content, and thriller short films",
    "glitch": "digital glitch and distortion effects for modern videos, transitions, and cyberpunk content",
    "keyboard": "mechanical and membrane keyboard sounds for office scenes, ASMR, and tech content",
    "typing": "realistic typing sounds for computer work scenes, productivity videos, and ambient audio",
    "pop": "fun pop sounds for animations, UI feedback, cartoons, and notification effects",
    "paper": "paper foley sounds for document handling, book scenes, and office environments",
    "highlighter": "marker and highlighter sounds for study content, whiteboard videos, and ASMR",
    "notification": "alert and notification sounds for apps, UI design, and mobile interfaces",
    "ui-click": "UI click and interaction sounds for app design, web interfaces, and software demos",
    "writing": "pen and pencil writing sounds for study scenes, calligraphy, and ASMR content",
    "coins": "coin and money sounds for games, reward systems, and financial content",
    "swoosh": "fast swoosh and movement sounds for action scenes, sports, and dynamic content",
    "gun-shots": "realistic gun shot and firearm sounds for action scenes and war movies",
    "human-sounds": "human vocal sounds including screams, laughs, coughs, and other natural body sounds",
    "glass-breaking": "realistic glass breaking and shattering sounds for accidents and dramatic scenes",
    "fire": "fire and flame sounds for campfires, burning scenes, and atmospheric ambient audio",
    "thunder": "thunder and storm sounds for weather effects and atmospheric ambience",
    "train": "train and railway sounds for transportation scenes, travel content, and ambient background",
    "beats": "rhythmic beats and percussion sounds for music, transitions, and background rhythms",
    "impacts": "impact and crash sounds for action scenes, collisions, and dramatic effects",
    "home-things": "everyday household sounds for domestic scenes and office environments",
    "mouse-clicks": "computer mouse sounds for office scenes, UI design, and technology content",
    "water-sounds": "water and liquid sounds for nature scenes and environmental audio",
}

DEFAULT_DESCRIPTION = "perfect for short films, video production, and multimedia projects. Royalty-free for commercial use"
FEATURES = ["Royalty-Free", "High Quality", "AI Generated", "Multiple Variations"]


def prompts_for(sound_type: str) -> List[str]:
    if sound_type in PROMPTS:
        return PROMPTS[sound_type]
    return [
        f"{sound_type} sound effect, high quality audio for film",
        f"{sound_type} sound effect, professional cinematic recording",
        f"{sound_type} sound effect, clean and crisp production",
        f"{sound_type} sound effect, short film quality",
        f"{sound_type} sound effect, movie production ready",
    ]


def prompt_at(sound_type: str, index: int) -> str:
    """The library is cycled when more items are requested than it holds"""
    prompts = prompts_for(sound_type)
    return prompts[index % len(prompts)]


def tags_for(sound_type: str) -> List[str]:
    return TAGS.get(sound_type) or [
        sound_type, "sound effect", "sfx", "audio", "short film", "cinematic", "professional", "royalty free"
    ]


def description_for(sound_type: str) -> str:
    return DESCRIPTIONS.get(sound_type, DEFAULT_DESCRIPTION)


def name_from_prompt(prompt: str) -> str:
    """'Paper tear, ripping paper apart' -> 'Paper Tear'"""
    main = prompt.split(",")[0].strip()
    return " ".join(word[:1].upper() + word[1:].lower() for word in main.split(" "))
