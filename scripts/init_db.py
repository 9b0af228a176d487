"""Creates the site reviews file and public folder."""
import json
import os

from app.config import settings


os.makedirs(settings.DATA_DIR, exist_ok=True)
os.makedirs(settings.PUBLIC_DIR, exist_ok=True)


if not os.path.exists(settings.reviews_path):
    with open(settings.reviews_path, 'w', encoding='utf-8') as f:
        json.dump([], f)
    print(f'Created {settings.reviews_path}')
else:
    print(f'{settings.reviews_path} already exists')
