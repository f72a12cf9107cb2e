from .astronomy import DailyAstronomyOut, DailyAstronomyResponse, SunTimesOut
from .locations import SavedLocationCreate, SavedLocationUpdate, SavedLocationOut, SavedLocationCreated
from .preferences import TempLocationIn, ActiveLocationIn, PreferencesPatch, PreferencesOut
from .jobs import GenerationRequest, JobStatus
from .lunar import LunarCheckIn, LunarCheckOut, LunarSuggestionOut
