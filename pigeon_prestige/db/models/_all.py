# Importa todos los modelos para que SQLAlchemy registre las tablas y relaciones
from pigeon_prestige.db.models.user import User
from pigeon_prestige.db.models.pigeon import Pigeon
from pigeon_prestige.db.models.food import Food, UserFoodInventory
from pigeon_prestige.db.models.food_mix import FoodMix
from pigeon_prestige.db.models.group import PigeonGroup, PigeonGroupMember, GroupFeeding
from pigeon_prestige.db.models.feed_history import PigeonFeedHistory
from pigeon_prestige.db.models.race import Race
from pigeon_prestige.db.models.race_entry import RaceEntry
from pigeon_prestige.db.models.transaction import Transaction
from pigeon_prestige.db.models.game_time import GameTimeState, GameTimeLog
from pigeon_prestige.db.models.breeding_pair import BreedingPair
from pigeon_prestige.db.models.market_listing import MarketListing
