"""
Akinator Core — Рушій адаптивного вгадування творів

Архітектура: мультиплікативні ваги + вибір питань за рівним розбиттям +
скінченний автомат гри

Модулі:
- config: Конфігурація рушія (сувора валідація)
- schemas: Каталог, питання, стан сесії
- scoring: Ймовірності, впевненість, ефективні кандидати
- question_engine: Фільтр покриття, оновлення ваг, вибір питань
- game_cycle: Цикл гри, репозиторій сесій, історія ігор
"""

__version__ = "0.1.0"

from .config import EngineConfig, get_default_config, load_config
from .errors import AkinatorError, ConfigError, ProtocolError
