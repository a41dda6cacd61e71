"""
Curriculum catalog.

CurriculumCatalog holds one ordered level path per subject. The engine works
with any catalog; reference_catalog() builds the shipped one: four subjects,
one level per grade from Pre-K to Grade 6, three quests per level.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import lru_cache

from questcore.core.subjects import CurriculumGrade, CurriculumSubject
from questcore.curriculum.models import CurriculumLevel, CurriculumQuest

# Quests needed to pass a reference level (of three)
REFERENCE_QUESTS_REQUIRED = 2


class CurriculumCatalog:
    """Ordered, per-subject level paths."""

    def __init__(self, paths: Mapping[CurriculumSubject, Sequence[CurriculumLevel]]):
        self._paths: dict[CurriculumSubject, tuple[CurriculumLevel, ...]] = {
            subject: tuple(levels) for subject, levels in paths.items()
        }
        self._by_id: dict[str, CurriculumLevel] = {}
        for levels in self._paths.values():
            for level in levels:
                if level.id in self._by_id:
                    raise ValueError(f"Duplicate level id: {level.id}")
                self._by_id[level.id] = level

    @property
    def subjects(self) -> tuple[CurriculumSubject, ...]:
        return tuple(self._paths)

    def levels(self, subject: CurriculumSubject) -> tuple[CurriculumLevel, ...]:
        return self._paths.get(subject, ())

    def index_of(self, level: CurriculumLevel, subject: CurriculumSubject) -> int | None:
        """Position of a level in the subject path, or None if it is not there."""
        for i, candidate in enumerate(self.levels(subject)):
            if candidate.id == level.id:
                return i
        return None

    def index_of_first_level(self, grade: CurriculumGrade, subject: CurriculumSubject) -> int | None:
        for i, level in enumerate(self.levels(subject)):
            if level.grade == grade:
                return i
        return None

    def level_by_id(self, level_id: str) -> CurriculumLevel | None:
        return self._by_id.get(level_id)

    def has_level(self, subject: CurriculumSubject, level_id: str) -> bool:
        level = self._by_id.get(level_id)
        return level is not None and level.subject == subject

    @property
    def total_levels(self) -> int:
        return sum(len(levels) for levels in self._paths.values())


# =============================================================================
# Reference content
# =============================================================================
# grade -> (theme, overview, {subject: (storyline, ((title, topic, reward), ...))})

_M = CurriculumSubject.MATH
_L = CurriculumSubject.LANGUAGE
_S = CurriculumSubject.SCIENCE
_V = CurriculumSubject.VALUES

REFERENCE_COURSES: dict[CurriculumGrade, tuple[str, str, dict]] = {
    CurriculumGrade.PRE_K: (
        "Wonder Garden Explorers",
        "Playful discovery with quick-win activities that build confidence in counting, letters, science observation, and kindness.",
        {
            _M: ("Help the Meadow Sprites gather treasures by counting and matching shapes.", (
                ("Apple Basket Count", "Counting 1–10", "Earn a sticker for the sprite's scrapbook"),
                ("Shape Safari", "Shapes & Patterns", "Unlock a new explorer hat for the avatar"),
                ("Tiny Comparison Trail", "Compare Groups", "Collect firefly lights that brighten the map"),
            )),
            _L: ("Feed the Phonics Monster and paint letters to unlock the alphabet song.", (
                ("Letter Painting", "Letter Recognition", "Add glitter brushes to the painting palette"),
                ("Phonics Picnic", "Beginning Sounds", "Unlock a new picnic blanket pattern"),
                ("Alphabet Parade", "Letter Sequencing", "Earn parade badges displayed in the sticker book"),
            )),
            _S: ("Visit the Wonder Garden and identify senses, animals, and weather.", (
                ("Sense Detective", "Five Senses", "Grow a sensory flower in the kid's garden"),
                ("Animal Sound Hunt", "Animals & Habitats", "Collect habitat cards for the field journal"),
                ("Weather Wheel", "Weather Basics", "Unlock a rainbow trail animation on the map"),
            )),
            _V: ("Guide gentle creatures to make kind choices around the Wonder Garden chapel.", (
                ("Sharing Seeds", "Sharing & Kindness", "Earn kindness gems that unlock lullaby music"),
                ("Color the Symbols", "Faith & Community Symbols", "Add the colored symbol to the chapel stained glass"),
                ("Feelings Garden", "Emotions Vocabulary", "Unlock a new calming background for bedtime mode"),
            )),
        },
    ),
    CurriculumGrade.KINDERGARTEN: (
        "Neighborhood Quest Buddies",
        "Story-driven quests introduce structured practice with manipulatives, sight words, and nature missions.",
        {
            _M: ("Join Builder Bot to stack number blocks and solve early addition puzzles.", (
                ("Number Block Adventure", "Counting to 20", "Unlock blueprint pieces for Builder Bot's workshop"),
                ("Snack Shop Sums", "Intro Addition & Subtraction", "Earn recipe cards for the snack stand"),
                ("Measure Trail", "Non-standard Measurement", "Collect explorer badges on the quest map"),
            )),
            _L: ("Form sight words, rhyme with forest critters, and build tiny stories.", (
                ("Sight Word Garden", "Sight Words", "Grow animated butterflies around the reading nook"),
                ("Rhyme River", "Rhyming", "Unlock new oars and boat colors"),
                ("Story Stones", "Simple Sentences", "Collect storybook covers for the shelf"),
            )),
            _S: ("Collect weather data and care for classroom plants.", (
                ("Weather Station", "Weather & Seasons", "Unlock a forecast widget on the home screen"),
                ("Habitat Builder", "Animal Habitats", "Add habitat diorama pieces to the classroom"),
                ("Plant Patrol", "Plant Needs", "Unlock new seeds for the science corner"),
            )),
            _V: ("Meet community helpers and practice empathy through role-play.", (
                ("Helper HQ", "Community Helpers", "Unlock helper badges and costume pieces"),
                ("Family Tree Time", "Family Roles", "Add portraits to the in-app clubhouse"),
                ("Neighborhood Map", "Basic Geography", "Reveal hidden playground locations on the main map"),
            )),
        },
    ),
    CurriculumGrade.GRADE1: (
        "Clockwork Town Guardians",
        "Chapter-based missions combine math boss battles, early comprehension, and civic adventures.",
        {
            _M: ("Repair Clockwork Town by mastering mixed operations and telling time.", (
                ("Gear Up Addition", "Addition/Subtraction to 20", "Unlock gear motifs for the avatar"),
                ("Place Value Workshop", "Tens and Ones", "Add new workshop tools to the HQ"),
                ("Time Keeper Trials", "Time to Hour & Half Hour", "Activate new areas in Clockwork Town"),
            )),
            _L: ("Guide storybook heroes through comprehension checkpoints and grammar puzzles.", (
                ("Chapter Checkpoint", "Reading Comprehension", "Collect illustration cards for the library"),
                ("Grammar Garden", "Nouns & Verbs", "Grow grammar flowers that decorate the home hub"),
                ("Story Forge", "Sentence Building", "Unlock hero emotes for story playback"),
            )),
            _S: ("Discover life cycles and states of matter in interactive labs.", (
                ("Lifecycle Lab", "Animal & Plant Cycles", "Collect holographic life cycle cards"),
                ("Matter Mixer", "States of Matter", "Unlock lab equipment skins"),
                ("Super Sense Review", "Human Senses", "Earn lab assistant companion"),
            )),
            _V: ("Help citizens rebuild their community park through civic choices.", (
                ("Town Treasure Hunt", "Local History", "Display artifacts in the community museum"),
                ("Civic Helpers", "Basic Civics", "Earn town improvement badges"),
                ("Kind Choice Corners", "Social Problem Solving", "Unlock park decorations chosen by the learner"),
            )),
        },
    ),
    CurriculumGrade.GRADE2: (
        "Skyship Expedition",
        "Cooperative quests, weather labs, and storytelling decks deepen critical thinking and creativity.",
        {
            _M: ("Upgrade the expedition airship using double-digit operations and budding multiplication.", (
                ("Sky Dock Sums", "Add/Subtract to 100", "Unlock new ship sails and decals"),
                ("Cargo Crew", "Intro Multiplication", "Adopt a helpful robo-parrot companion"),
                ("Time Trader", "Time to 5 Minutes & Money", "Unlock merchant costumes and stall upgrades"),
            )),
            _L: ("Collect story sparks to compose multi-sentence adventures.", (
                ("Story Forge Deck", "Paragraph Sequencing", "Unlock new illustration packs"),
                ("Wordsmith Workshop", "Adjectives & Descriptions", "Earn design patterns for the writing journal"),
                ("Creative Captains", "Writing Basics", "Unlock cabin décor themed to stories"),
            )),
            _S: ("Chart weather patterns and engineer balanced habitats on distant islands.", (
                ("Weather Lab", "Weather Patterns", "Unlock forecast instruments for the airship"),
                ("Habitat Sandbox", "Ecosystem Balance", "Adopt new animal buddies for the ship"),
                ("Experiment Log", "Scientific Method Basics", "Earn scientist patches on the expedition jacket"),
            )),
            _V: ("Celebrate cultures discovered on each island and practice thoughtful choices.", (
                ("Culture Exchange", "World Cultures", "Add cultural decor to the skyship commons"),
                ("Map Makers", "Mapping Skills", "Unlock navigation compass skins"),
                ("Decision Deck", "Community Choices", "Earn leadership badges for the captain's log"),
            )),
        },
    ),
    CurriculumGrade.GRADE3: (
        "Mystic Forest Guild",
        "Challenge mode unlocks dungeon crawls, fraction crafting, and civic decision trees with optional leaderboards.",
        {
            _M: ("Delve into the Mystic Forest to defeat math guardians using multiplication, division, and fractions.", (
                ("Multiplication Gauntlet", "Multiplication Facts", "Unlock enchanted weapons for avatars"),
                ("Fraction Forge", "Fraction Modeling", "Collect luminous fraction crystals"),
                ("Area & Perimeter Patrol", "Geometry Basics", "Expand guild treehouse rooms"),
            )),
            _L: ("Investigate mysteries by synthesizing passages, vocabulary, and figurative language.", (
                ("Mystery Files", "Reading Comprehension", "Unlock detective gadgets for avatars"),
                ("Word Wizard Arena", "Vocabulary & Prefixes", "Earn spell animations for the quest map"),
                ("Poetry Grove", "Figurative Language", "Grow glowing poetry vines in the grove"),
            )),
            _S: ("Study energy, life cycles, and Earth changes through interactive quests.", (
                ("Ecosystem Watch", "Ecosystems", "Unlock new biomes within the forest"),
                ("Energy Lab", "Energy Transfer", "Earn energy totems powering the guild hall"),
                ("Rock Cycle Run", "Rock Cycle", "Collect rock badges for the geology wing"),
            )),
            _V: ("Lead the guild council through historical dilemmas and map expeditions.", (
                ("Branches of Government", "Civics", "Unlock council chamber upgrades"),
                ("History Chronicles", "National History", "Add pages to the guild chronicle book"),
                ("Explorer Maps", "Advanced Map Skills", "Reveal hidden forest shrines"),
            )),
        },
    ),
    CurriculumGrade.GRADE4: (
        "Innovation Harbor",
        "Learners tackle multi-step operations, literary analysis, and government simulations with increased autonomy.",
        {
            _M: ("Restore Innovation Harbor's power grid using long operations and advanced fractions.", (
                ("Power Grid Puzzles", "Multi-digit Operations", "Unlock harbor district upgrades"),
                ("Fraction Marketplace", "Equivalent & Comparing Fractions", "Gain merchant alliance perks"),
                ("Engineer Bay", "Multi-digit Multiplication & Division", "Unlock engineering drone companions"),
            )),
            _L: ("Run an investigative newsroom analyzing novels and grammar intricacies.", (
                ("Novel Newsroom", "Literary Analysis", "Unlock newsroom equipment skins"),
                ("Grammar Workshop", "Advanced Grammar", "Earn editor badges"),
                ("Media Lab", "Media Literacy", "Unlock media studio backgrounds"),
            )),
            _S: ("Operate harbor labs exploring energy, Earth systems, and engineering.", (
                ("Energy Transfer Lab", "Energy & Waves", "Upgrade lab reactors"),
                ("Earth Systems Mission", "Earth Processes", "Unlock exploration submarines"),
                ("Engineering Challenges", "Simple Machines", "Earn innovation trophies"),
            )),
            _V: ("Engage in government simulations and ethical debates for the harbor council.", (
                ("Harbor Council", "Government Branches", "Unlock council chamber seating and insignias"),
                ("Economy Simulator", "Economics Basics", "Gain trade route boosts"),
                ("Ethics Forum", "Ethical Decision Making", "Earn peacemaker laurels"),
            )),
        },
    ),
    CurriculumGrade.GRADE5: (
        "Frontier Research Alliance",
        "Expedition quests combine rich data analysis, advanced writing, and immersive science missions.",
        {
            _M: ("Lead research expeditions solving fraction operations, decimals, and volume puzzles.", (
                ("Fraction Expedition", "Fraction Operations", "Unlock expedition gear skins"),
                ("Decimal Data Lab", "Decimals & Graphing", "Add scientific instruments to the base"),
                ("Volume Vault", "Volume & 3D Shapes", "Unlock holographic display cases"),
            )),
            _L: ("Investigate historical mysteries with research skills and persuasive writing.", (
                ("Investigation Notes", "Research Skills", "Unlock research assistant bots"),
                ("Figurative Language Studio", "Figurative Language", "Earn spotlight animations for presentations"),
                ("Argument Builder", "Argumentative Writing", "Unlock debate stage cosmetics"),
            )),
            _S: ("Conduct mission control simulations and long-term ecosystem monitoring.", (
                ("Mission Control", "Space & Earth Systems", "Unlock mission patches and call signs"),
                ("Mixture Lab", "Mixtures & Solutions", "Earn lab safety gear items"),
                ("Ecosystem Watchtower", "Ecosystem Monitoring", "Unlock wildlife cams in the base"),
            )),
            _V: ("Lead debates and strategy missions to explore history and civic responsibility.", (
                ("Historical Timeline Forge", "US History", "Unlock museum exhibits in the alliance HQ"),
                ("Debate Arena", "Debate & Civics", "Earn leadership titles and banners"),
                ("Strategy Maps", "Geography & Economics", "Unlock alliance trade routes"),
            )),
        },
    ),
    CurriculumGrade.GRADE6: (
        "Global Guardians",
        "Quest chains introduce ratios, advanced writing, and scientific inquiry with branching diplomacy missions.",
        {
            _M: ("Balance city regions using ratios, integers, and coordinate challenges.", (
                ("Ratio Rescue", "Ratios & Rates", "Unlock ration packs that boost future quests"),
                ("Integer Ice Caves", "Integers", "Unlock guardian pets with elemental powers"),
                ("Coordinate Command", "Coordinate Planes & Algebraic Thinking", "Gain access to advanced quest chains"),
            )),
            _L: ("Investigate global mysteries through literary analysis and persuasive writing.", (
                ("Evidence Lab", "Literary Analysis", "Unlock analysis lenses that highlight themes"),
                ("Debate League", "Argumentative Writing & Speaking", "Earn debate trophies and hall of fame placement"),
                ("Media Investigation", "Media Literacy", "Unlock newsroom studio upgrades"),
            )),
            _S: ("Lead global labs exploring cells, energy, and climate feedback systems.", (
                ("Cell City", "Cells & Systems", "Unlock microscopy filters for lab view"),
                ("Energy Network", "Energy Transfer", "Gain energy cores powering new missions"),
                ("Climate Quest", "Earth Systems & Scientific Method", "Unlock global diplomacy missions"),
            )),
            _V: ("Negotiate peace, manage trade, and explore ethics across continents.", (
                ("Diplomacy Nexus", "Global Citizenship", "Unlock alliance flags and anthem"),
                ("Trade Winds", "Economics & Trade", "Gain trade bonuses for the guardian council"),
                ("Ethics Council", "Ethical Decision Challenges", "Earn world harmony emblems"),
            )),
        },
    ),
}


def level_id(subject: CurriculumSubject, grade: CurriculumGrade) -> str:
    return f"{subject.value}-{grade.value}"


@lru_cache
def reference_catalog() -> CurriculumCatalog:
    """Build the shipped catalog: each subject path runs Pre-K through Grade 6."""
    paths: dict[CurriculumSubject, list[CurriculumLevel]] = {subject: [] for subject in CurriculumSubject}
    for grade in CurriculumGrade:
        theme, overview, tracks = REFERENCE_COURSES[grade]
        for subject in CurriculumSubject:
            storyline, quests = tracks[subject]
            paths[subject].append(
                CurriculumLevel(
                    id=level_id(subject, grade),
                    subject=subject,
                    title=f"{theme}: {subject.display_name}",
                    grade=grade,
                    focus=storyline,
                    overview=overview,
                    quests_required_for_mastery=REFERENCE_QUESTS_REQUIRED,
                    quests=tuple(CurriculumQuest(title, topic, reward) for title, topic, reward in quests),
                    reward=f"{theme} {subject.display_name} badge",
                )
            )
    return CurriculumCatalog(paths)
