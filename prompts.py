"""Fixed instruction sent with every car photo. Not user-editable."""

CAR_PROMPT = (
    "Analyze this car image for educational purposes and provide the following information:\n"
    "1. Car identification (make, model, year range, variant, body style, distinguishing features)\n"
    "2. Technical specifications (engine, power output, transmission, drivetrain, performance metrics)\n"
    "3. Design and features (exterior, interior, safety systems, technology, notable options)\n"
    "4. Market and value (price range, market position, competitors, depreciation, collectibility)\n"
    "5. Additional information (heritage, performance history, interesting facts, environmental rating)\n"
    "\n"
    "IMPORTANT: This is for educational purposes only."
)
