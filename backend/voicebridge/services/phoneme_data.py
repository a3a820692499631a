"""Static pronunciation guides served by ``/api/guides``."""
from __future__ import annotations
from typing import Any, Dict, List, Optional

CATEGORIES = ("Fricatives", "Liquids", "Affricates", "Stops", "Nasals", "Glides")

PHONEME_GUIDES: List[Dict[str, Any]] = [
    {
        "id": "s",
        "phoneme": "/s/",
        "name": "S Sound",
        "category": "Fricatives",
        "difficulty": "medium",
        "description": "A hissing sound made by pushing air through a narrow gap behind the top teeth.",
        "tonguePosition": "Tongue tip close to the ridge behind the upper front teeth, without touching it.",
        "lipPosition": "Lips slightly apart and relaxed, teeth close together.",
        "airflow": "Steady stream of air over the middle of the tongue.",
        "examples": ["sun", "bus", "basket", "sister"],
        "tips": ["Smile a little and keep your teeth almost closed.", "Make a long snake sound: ssss."],
        "commonMistakes": ["Tongue between the teeth (lisp)", "Air escaping over the sides of the tongue"],
    },
    {
        "id": "z",
        "phoneme": "/z/",
        "name": "Z Sound",
        "category": "Fricatives",
        "difficulty": "medium",
        "description": "The voiced partner of /s/: the same mouth shape with the voice switched on.",
        "tonguePosition": "Tongue tip close to the ridge behind the upper front teeth.",
        "lipPosition": "Lips slightly apart, teeth close together.",
        "airflow": "Steady airflow with the vocal cords vibrating.",
        "examples": ["zoo", "buzz", "lazy", "zebra"],
        "tips": ["Put a hand on your throat and feel the buzz.", "Pretend to be a bee: zzzz."],
        "commonMistakes": ["Dropping the voice so it sounds like /s/"],
    },
    {
        "id": "sh",
        "phoneme": "/ʃ/",
        "name": "SH Sound",
        "category": "Fricatives",
        "difficulty": "medium",
        "description": "The quiet sound, made with rounded lips and the tongue pulled back slightly.",
        "tonguePosition": "Tongue raised toward the roof of the mouth, further back than for /s/.",
        "lipPosition": "Lips rounded and pushed forward.",
        "airflow": "Broad, soft stream of air.",
        "examples": ["ship", "fish", "washing", "shoe"],
        "tips": ["Put a finger to your lips like asking for quiet.", "Round your lips before you start."],
        "commonMistakes": ["Flat lips turning the sound into /s/"],
    },
    {
        "id": "f",
        "phoneme": "/f/",
        "name": "F Sound",
        "category": "Fricatives",
        "difficulty": "easy",
        "description": "Made by gently resting the top teeth on the bottom lip and blowing.",
        "tonguePosition": "Tongue relaxed and low in the mouth.",
        "lipPosition": "Upper teeth resting lightly on the lower lip.",
        "airflow": "Air pushed between the teeth and the lip.",
        "examples": ["fan", "leaf", "coffee", "fox"],
        "tips": ["Bite your bottom lip gently and blow like cooling soup."],
        "commonMistakes": ["Using both lips so it sounds like /p/"],
    },
    {
        "id": "th",
        "phoneme": "/θ/",
        "name": "TH Sound",
        "category": "Fricatives",
        "difficulty": "hard",
        "description": "The voiceless TH, made with the tongue peeking out between the teeth.",
        "tonguePosition": "Tongue tip placed lightly between the upper and lower front teeth.",
        "lipPosition": "Lips relaxed and open.",
        "airflow": "Soft air blown over the tongue.",
        "examples": ["think", "bath", "nothing", "three"],
        "tips": ["Show a little bit of your tongue.", "Blow gently, do not push hard."],
        "commonMistakes": ["Replacing it with /f/ (fink)", "Replacing it with /t/ (tink)"],
    },
    {
        "id": "r",
        "phoneme": "/r/",
        "name": "R Sound",
        "category": "Liquids",
        "difficulty": "hard",
        "description": "A smooth sound made with the tongue pulled back and the sides touching the back teeth.",
        "tonguePosition": "Tongue tip curled up or bunched back, sides against the upper back teeth.",
        "lipPosition": "Lips slightly rounded.",
        "airflow": "Continuous voiced airflow over the tongue.",
        "examples": ["red", "car", "carrot", "rabbit"],
        "tips": ["Start from a long 'eee' and pull your tongue back.", "Growl like a tiger: rrrr."],
        "commonMistakes": ["Sounding like /w/ (wabbit)", "Tongue tip touching the roof of the mouth"],
    },
    {
        "id": "l",
        "phoneme": "/l/",
        "name": "L Sound",
        "category": "Liquids",
        "difficulty": "medium",
        "description": "Made by touching the tongue tip to the ridge behind the top teeth and letting air flow round it.",
        "tonguePosition": "Tongue tip pressed on the ridge behind the upper front teeth.",
        "lipPosition": "Lips open and relaxed.",
        "airflow": "Voiced air flows around the sides of the tongue.",
        "examples": ["lion", "ball", "yellow", "lamp"],
        "tips": ["Sing 'la la la' and feel the tongue tap.", "Keep the tongue tip up while you say it."],
        "commonMistakes": ["Sounding like /w/ or /j/"],
    },
    {
        "id": "ch",
        "phoneme": "/tʃ/",
        "name": "CH Sound",
        "category": "Affricates",
        "difficulty": "medium",
        "description": "A stop followed by a SH: the tongue blocks the air, then releases it with a push.",
        "tonguePosition": "Tongue blade pressed to the roof of the mouth behind the ridge, then released.",
        "lipPosition": "Lips rounded and slightly forward.",
        "airflow": "A short burst of air after the release.",
        "examples": ["chair", "watch", "kitchen", "cheese"],
        "tips": ["Sneeze like a train: choo choo!"],
        "commonMistakes": ["Leaving out the stop so it sounds like /ʃ/"],
    },
    {
        "id": "j",
        "phoneme": "/dʒ/",
        "name": "J Sound",
        "category": "Affricates",
        "difficulty": "medium",
        "description": "The voiced partner of CH.",
        "tonguePosition": "Tongue blade pressed to the roof of the mouth, then released.",
        "lipPosition": "Lips rounded and slightly forward.",
        "airflow": "Voiced burst of air after the release.",
        "examples": ["jump", "bridge", "magic", "jelly"],
        "tips": ["Say CH and add your voice."],
        "commonMistakes": ["Sounding like /d/ or /z/"],
    },
    {
        "id": "p",
        "phoneme": "/p/",
        "name": "P Sound",
        "category": "Stops",
        "difficulty": "easy",
        "description": "A quiet pop made by closing both lips and letting the air burst out.",
        "tonguePosition": "Tongue relaxed and low.",
        "lipPosition": "Both lips pressed together, then opened quickly.",
        "airflow": "Air builds behind the lips and is released in a puff.",
        "examples": ["pig", "cup", "happy", "pop"],
        "tips": ["Hold a tissue in front of your mouth and make it move."],
        "commonMistakes": ["Adding voice so it sounds like /b/"],
    },
    {
        "id": "k",
        "phoneme": "/k/",
        "name": "K Sound",
        "category": "Stops",
        "difficulty": "medium",
        "description": "A back sound made by lifting the back of the tongue to the soft palate.",
        "tonguePosition": "Back of the tongue raised against the soft palate, tip down.",
        "lipPosition": "Lips open and relaxed.",
        "airflow": "Air stopped at the back of the mouth, then released.",
        "examples": ["cat", "book", "cookie", "kite"],
        "tips": ["Keep your tongue tip behind the bottom teeth.", "Make a little cough sound."],
        "commonMistakes": ["Fronting: saying /t/ instead (tat for cat)"],
    },
    {
        "id": "m",
        "phoneme": "/m/",
        "name": "M Sound",
        "category": "Nasals",
        "difficulty": "easy",
        "description": "A humming sound made with closed lips while air flows through the nose.",
        "tonguePosition": "Tongue relaxed.",
        "lipPosition": "Lips closed gently.",
        "airflow": "Voiced air flows out through the nose.",
        "examples": ["moon", "jam", "summer", "mom"],
        "tips": ["Hum like something tastes yummy: mmmm."],
        "commonMistakes": ["Blocked nose making it sound like /b/"],
    },
    {
        "id": "n",
        "phoneme": "/n/",
        "name": "N Sound",
        "category": "Nasals",
        "difficulty": "easy",
        "description": "Made with the tongue tip on the ridge behind the teeth while air flows through the nose.",
        "tonguePosition": "Tongue tip on the ridge behind the upper front teeth.",
        "lipPosition": "Lips slightly open.",
        "airflow": "Voiced air through the nose.",
        "examples": ["nose", "sun", "banana", "nine"],
        "tips": ["Say 'no no no' and feel your nose buzz."],
        "commonMistakes": ["Sounding like /d/"],
    },
    {
        "id": "w",
        "phoneme": "/w/",
        "name": "W Sound",
        "category": "Glides",
        "difficulty": "easy",
        "description": "A gliding sound starting from tightly rounded lips.",
        "tonguePosition": "Back of the tongue raised toward the soft palate.",
        "lipPosition": "Lips rounded tightly, then opening into the next vowel.",
        "airflow": "Voiced airflow while the lips move.",
        "examples": ["water", "window", "away", "wet"],
        "tips": ["Start with an 'oo' and slide into the word."],
        "commonMistakes": ["Lips not rounded enough"],
    },
    {
        "id": "y",
        "phoneme": "/j/",
        "name": "Y Sound",
        "category": "Glides",
        "difficulty": "easy",
        "description": "A gliding sound starting from an 'ee' tongue position.",
        "tonguePosition": "Middle of the tongue raised high toward the hard palate.",
        "lipPosition": "Lips spread slightly.",
        "airflow": "Voiced airflow while the tongue glides down.",
        "examples": ["yes", "yellow", "yo-yo", "young"],
        "tips": ["Say a quick 'ee' before the word: ee-es becomes yes."],
        "commonMistakes": ["Dropping the sound (es for yes)"],
    },
]

_BY_ID = {g["id"]: g for g in PHONEME_GUIDES}


def get_phoneme_by_id(phoneme_id: str) -> Optional[Dict[str, Any]]:
    return _BY_ID.get(phoneme_id)


def filter_guides(category: Optional[str] = None, difficulty: Optional[str] = None) -> List[Dict[str, Any]]:
    guides = list(PHONEME_GUIDES)
    if category:
        guides = [g for g in guides if g["category"].lower() == category.lower()]
    if difficulty:
        guides = [g for g in guides if g["difficulty"] == difficulty]
    return guides
