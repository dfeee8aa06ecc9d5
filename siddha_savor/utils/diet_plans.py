"""
Siddha diet plans per diagnosis.
Each plan runs for 7 days; day 1 is Monday, day 7 is Sunday.
"""
from datetime import date

MEAL_TYPES = ('breakfast', 'lunch', 'dinner')

MEAL_TIMES = {
    'breakfast': '8:00 AM',
    'lunch': '12:30 PM',
    'dinner': '8:00 PM',
}


def _day(breakfast, lunch, dinner, notes):
    return {
        'breakfast': [breakfast],
        'lunch': [lunch],
        'dinner': [dinner],
        'notes': notes,
    }


DIET_PLANS = {
    'Hypertension': {
        'description': 'A Siddha-based heart-healthy diet plan to help manage blood pressure naturally',
        'days': [
            _day('Fermented rice (overnight soaked rice) with curd',
                 'Native rice + ash gourd sambar + green leafy vegetable stir-fry + raw banana stir-fry',
                 'Millet upma + vegetable soup + figs + 1 glass of cow milk',
                 'Ash gourd reduces Pitham. Hibiscus leaves and Centella asiatica are beneficial for hypertension.'),
            _day('Sago porridge or native rice porridge',
                 'Millet rice + moong dal + cucumber curry + buttermilk',
                 'Idli + mint chutney + 1 glass of cow milk',
                 'Porridge helps maintain blood pressure. Cucumber cools Vatham and Pitham.'),
            _day('Ragi porridge (unsalted)',
                 'Rice + drumstick sambar + flat beans stir-fry + buttermilk',
                 '2 bananas + wheat chapati + bottle gourd curry + 1 glass of cow milk',
                 'Ragi porridge maintains Pitham. Drumstick supports circulation.'),
            _day('Vegetable uthappam + 1 boiled egg',
                 'Low-salt millet vegetable biryani + onion raita',
                 'Millet idiyappam + mixed vegetable gravy + amla juice + 1 glass of cow milk',
                 'Amla reduces Pitham. Onion supports lowering blood pressure.'),
            _day('Ragi dosa + onion chutney',
                 'Low-salt millet curd rice + beetroot',
                 'Tomato soup + 2 chapatis + 1 glass of cow milk',
                 'Low-salt curd cools Pitham. Onion supports blood pressure control.'),
            _day('Wheat dosa + garlic chutney',
                 'Rice + sambar + brinjal stir-fry + green leafy vegetable mash',
                 'Flattened rice (poha) upma with lemon juice + 2 bananas + 1 glass of cow milk',
                 'Garlic helps reduce blood pressure. Sour-tasting poha reduces Pitha disorders.'),
            _day('Pongal with ghee + coconut chutney or moong dal sambar',
                 'Rice with mutton or quail gravy OR paneer gravy',
                 'Vegetable khichdi (low salt) + pineapple + 1 glass of milk',
                 'Mutton and quail are pathiya unavu that help maintain blood pressure.'),
        ],
    },
    'Hemorrhoids': {
        'description': 'A Siddha-based high-fiber diet plan to help manage hemorrhoids and promote digestive health',
        'days': [
            _day('Ragi porridge + banana',
                 'Red rice + Mullangi (Radish) sambar + beetroot/kovakai (scarlet gourd) poriyal',
                 'Vegetable khichdi',
                 'Ragi cools Pitham; Radish softens stool.'),
            _day('Idli + garlic chutney',
                 'Millet rice + moong dal + senai kilangu (elephant foot yam) masiyal',
                 'Wheat chapati + bottle gourd gravy',
                 'Yam is a promising vegetable prescribed in Siddha medicine.'),
            _day('Wheat upma + papaya',
                 'Native rice + pumpkin sambar + vazhai poo (plantain flower) poriyal',
                 'Veg soup + 2 chapatis',
                 'Pumpkin aids easy stool passage. Vazhai poo reduces bleeding in hemorrhoids.'),
            _day('Millet pongal (less spice)',
                 'Rice + drumstick sambar + green leaf',
                 'Rice kanji + boiled veg',
                 'Green leaves are rich in fiber content.'),
            _day('Sago (Javvarisi) porridge/ native rice porridge',
                 'Native rice + mor kuzhambu + karunai kilangu (yam) masiyal',
                 'Millet dosa + veg kurma',
                 'Yam is a promising vegetable prescribed in Siddha medicine.'),
            _day('Overnight soaked raisins',
                 "Millet rice + dal + lady's finger poriyal",
                 'Wheat dosa + tomato soup',
                 "Lady's finger helps soften stools."),
            _day('Ragi idiyappam + coconut milk',
                 'Millet vegetable biryani (mild spice) + onion raita',
                 'Light kanji + mashed veggies',
                 'Coconut milk soothes intestines.'),
        ],
    },
    'Anemia': {
        'description': 'A Siddha-based iron-rich diet plan to help manage anemia and boost hemoglobin levels',
        'days': [
            _day('Pazhaya soru with curd + sundal',
                 'Native rice + drumstick sambar + keerai (green leaf)',
                 'Vegetable upma + pomegranate',
                 'Pazhaya soru balances the three dosham. Mathulai (pomegranate) enhances blood.'),
            _day('Ragi porridge + palm jaggery',
                 'Rice + murungai keerai (moringa leaves) kootu',
                 'Idli + tomato chutney + green or black grapes',
                 'Palm jaggery is rich in iron. Murungai keerai boosts hemoglobin.'),
            _day('Vegetable uthappam + mint chutney',
                 'Millet rice + fish or chicken curry (optional) + beetroot poriyal',
                 'Urud dhal adai made with banana, ghee and jaggery',
                 'Beetroot enriches hemoglobin levels.'),
            _day('Ragi dosa + groundnut chutney',
                 'Lemon rice + keerai (green leaf) masiyal',
                 'Vegetable uthappam + mixed vegetable soup',
                 'Citrus fruits like lemon enhance iron absorption.'),
            _day('Millet pongal + moong dhal sambar',
                 'Native rice + avarakai (flat beans) poriyal',
                 "Vegetable khichdi + athi (figs) with cow's milk",
                 'Figs are recommended for anemia. Millets balance Pitham.'),
            _day('Adai dosa (dal-rich) + coriander chutney',
                 'Thinai rice + murungakai (drumstick) sambar + buttermilk',
                 'Poha upma (Aval) + coconut chutney + 1 orange',
                 'Citrus fruits enhance iron absorption. Drumstick enhances general wellbeing.'),
            _day('Idiyappam + vegetable kurma + nellikai (amla) juice',
                 'Rice + mutton soup or paneer gravy',
                 'Dosa + tomato chutney + 2 bananas',
                 'Nellikai is Kayakarpam, a blood purifier that enhances iron absorption.'),
        ],
    },
    'Diabetes Mellitus': {
        'description': 'A Siddha-based diet plan to help manage blood sugar levels naturally',
        'days': [
            _day('Ragi kali + groundnut chutney',
                 'Native rice + keerai sambar + pavakkai (bitter gourd) poriyal',
                 'Millet upma + vegetable soup',
                 'Pavakkai reduces sugar; millets regulate Pitham and have low glycemic index.'),
            _day('Kambu (pearl millet) porridge (unsweetened)',
                 'Chapati + green gram dal + keerai (green leaves)',
                 'Ragi dosa + groundnut chutney',
                 'Kambu lowers glucose. Ragi controls Neerizhivu (diabetes) as per Siddha texts.'),
            _day('Adai (dal dosa) + mint chutney',
                 'Thinai rice + avaraikai (flat beans) sambar + kovakkai (scarlet gourd) poriyal',
                 'Sundal vegetable salad',
                 'Kovakkai controls Neerizhivu. Sundal is a good protein source.'),
            _day('Ragi idiyappam + vegetable kurma',
                 'Native rice + rasam + suraikai (bottle gourd) poriyal',
                 'Poha upma (Aval) + coconut chutney',
                 'Ash gourd is cooling and balances Pitham.'),
            _day('Broken samba wheat upma + sprouts salad',
                 'Ponni rice + brinjal sambar + keerai (green leaves)',
                 'Uthappam + vegetable curry',
                 'Keerai supports glucose control.'),
            _day('Thinai dosa + coconut chutney + 1 boiled egg or paneer',
                 'Native rice + pavakkai (bitter gourd) fry + moong dal',
                 'Sundal + vegetable salad',
                 'Bitter gourd supports pancreas naturally.'),
            _day('Overnight soaked venthayam (fenugreek) water + 2 idli + tomato chutney',
                 'Ponni rice + drumstick sambar + snake gourd poriyal',
                 'Vegetable soup + chapatti + 1 boiled egg',
                 'Drumstick improves Saaram. Millets have low glycemic index.'),
        ],
    },
}


def get_diet_plan(diagnosis):
    """Return the plan dict for a diagnosis, or None"""
    return DIET_PLANS.get(diagnosis)


def get_day_plan(diagnosis, day_number):
    """
    Return the meals for plan day 1..7, or None when there is no plan
    or the day is out of range.
    """
    plan = get_diet_plan(diagnosis)
    if not plan or day_number < 1 or day_number > len(plan['days']):
        return None
    return plan['days'][day_number - 1]


def plan_day_for(today=None):
    """Monday -> 1 ... Sunday -> 7"""
    return (today or date.today()).isoweekday()


def meal_items_for(diagnosis, meal_type, today=None):
    """
    Items and notes for one meal on a given date.

    Returns:
        tuple: (items, notes); items is empty when nothing is planned
    """
    day_plan = get_day_plan(diagnosis, plan_day_for(today))
    if not day_plan:
        return [], None
    return list(day_plan.get(meal_type) or []), day_plan.get('notes')
