"""
Bundled first-view content: a default car photo and its canned analysis.
Shown on the first page load so the page is never empty and no API call is needed.
"""
import os
from dataclasses import dataclass

from image_payload import ImagePayload, load_image_file

DEFAULT_IMAGE_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static", "default-car.jpg")

DEFAULT_ANALYSIS = """1. Car Identification:
- Make: Porsche
- Model: 911 (992 Series)
- Year Range: 2019-Present
- Variant: Carrera S
- Body Style: Coupe
- Distinguishing Features: Iconic sloping rear, wide rear fenders, LED light bar

2. Technical Specifications:
- Engine: 3.0L Twin-Turbocharged Flat-Six
- Power Output: Approximately 443 hp (330 kW)
- Transmission: 8-speed PDK dual-clutch automatic or 7-speed manual
- Drivetrain: Rear-wheel drive (RWD)
- 0-60 mph: Around 3.5 seconds
- Top Speed: Approximately 191 mph (307 km/h)

3. Design & Features:
- Exterior: Streamlined profile, LED headlights, retractable door handles
- Interior: Digital instrument cluster, 10.9-inch touchscreen, minimalist design
- Safety Systems: Adaptive cruise control, lane keep assist, automatic emergency braking
- Technology: Apple CarPlay, Android Auto, navigation system, Porsche Connect
- Notable Options: Sport Chrono package, ceramic brakes, adaptive suspension

4. Market & Value:
- Starting Price: $115,000-$130,000 (base model, when new)
- Current Market Position: Premium sports car segment
- Competitors: Ferrari F8, McLaren 570S, Audi R8, Mercedes-AMG GT
- Depreciation Rate: Lower than average (strong value retention)
- Collectibility Potential: High (continuing the legacy of the iconic 911 line)

5. Additional Information:
- Heritage: Continues the lineage of the 911, first introduced in 1963
- Performance History: Extensive motorsport heritage in endurance racing
- Interesting Facts: The 992 is the 8th generation of the Porsche 911
- Environmental Rating: Improved fuel efficiency over previous generations
- Ownership Considerations: High-performance driving experience, specialized maintenance"""


@dataclass(frozen=True)
class DefaultContent:
    image:    ImagePayload
    analysis: str


def load_default_content(image_path: str = DEFAULT_IMAGE_PATH, analysis: str = DEFAULT_ANALYSIS) -> DefaultContent:
    """Read the bundled photo once; raises ReadError if it is missing or broken."""
    return DefaultContent(image=load_image_file(image_path), analysis=analysis)
