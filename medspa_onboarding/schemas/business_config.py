from pydantic import BaseModel

DEFAULT_MEMORY_STORE = ["name", "preferences", "pastTreatments", "budget", "concerns"]
DEFAULT_RECALL_RULES = "Use memory to personalize recommendations."
DEFAULT_PRIVACY_RULES = "Never store medical history or PHI."
DEFAULT_HOURS = {"mon-sun": "9am–6pm"}


class BrandIdentity(BaseModel):
    tone: str = ""
    voice: str = ""
    keywords: list[str] = []
    personaName: str = ""
    personaBackstory: str = ""


class Location(BaseModel):
    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    parking: str = ""


class TeamMember(BaseModel):
    name: str = ""
    role: str = ""
    title: str = ""
    bio: str = ""
    specialties: list[str] = []
    certifications: list[str] = []


class ServicePrice(BaseModel):
    startingAt: float = 0
    range: str = ""
    perUnit: str = ""
    notes: str = ""


class Service(BaseModel):
    name: str = ""
    category: str = ""
    descriptionShort: str = ""
    descriptionLong: str = ""
    benefits: list[str] = []
    idealCandidate: str = ""
    contraindications: list[str] = []
    preCare: list[str] = []
    postCare: list[str] = []
    downtime: str = ""
    frequency: str = ""
    durationMinutes: int = 30
    price: ServicePrice = ServicePrice()
    faqs: list[str] = []
    upsells: list[str] = []
    crossSells: list[str] = []


class Membership(BaseModel):
    name: str = ""
    price: str = ""
    perks: list[str] = []
    terms: str = ""


class Package(BaseModel):
    name: str = ""
    servicesIncluded: list[str] = []
    price: str = ""
    savings: str = ""


class Policies(BaseModel):
    cancellation: str = ""
    noShow: str = ""
    late: str = ""
    refund: str = ""
    children: str = ""


class FAQ(BaseModel):
    q: str = ""
    a: str = ""


class BookingConfig(BaseModel):
    type: str = "mock"
    requiresPayment: bool = False
    depositAmount: float | None = None
    url: str = ""
    instructions: str = ""


class SafetyConfig(BaseModel):
    disclaimers: list[str] = []
    redFlags: list[str] = []
    escalationRules: str = ""


class ConsultationFlows(BaseModel):
    botox: str = ""
    filler: str = ""
    skincare: str = ""
    weightLoss: str = ""
    laser: str = ""


class AiBehavior(BaseModel):
    tone: str = ""
    identity: str = "AI Receptionist"
    speakingStyle: str = ""
    greetingStyle: str = ""
    salesStyle: str = ""
    objectionHandling: str = ""
    closingPhrases: list[str] = []


class MemoryConfig(BaseModel):
    store: list[str] = DEFAULT_MEMORY_STORE
    recallRules: str = DEFAULT_RECALL_RULES
    privacyRules: str = DEFAULT_PRIVACY_RULES


class BusinessConfig(BaseModel):
    id: str = ""
    name: str = ""
    tagline: str = ""
    brandIdentity: BrandIdentity = BrandIdentity()
    locations: list[Location] = []
    hours: dict[str, str] = DEFAULT_HOURS
    team: list[TeamMember] = []
    services: list[Service] = []
    faqs: list[FAQ] | None = None
    memberships: list[Membership] = []
    packages: list[Package] = []
    policies: Policies = Policies()
    booking: BookingConfig = BookingConfig()
    safety: SafetyConfig = SafetyConfig()
    consultationFlows: ConsultationFlows = ConsultationFlows()
    aiBehavior: AiBehavior = AiBehavior()
    memory: MemoryConfig = MemoryConfig()
