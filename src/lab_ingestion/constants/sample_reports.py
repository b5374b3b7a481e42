# src/lab_ingestion/constants/sample_reports.py
"""
Sample lab report texts for smoke tests and consistency runs.
"""

SAMPLE_LAB_TEXT = """
COMPREHENSIVE METABOLIC PANEL
Patient: John Doe
Date: 2024-01-15
Lab: HealthLab Inc.

LIPID PANEL:
LDL Cholesterol: 145 mg/dL (Normal: <100)
HDL Cholesterol: 42 mg/dL (Normal: >40)
Triglycerides: 180 mg/dL (Normal: <150)
Total Cholesterol: 220 mg/dL

GLUCOSE METABOLISM:
Glucose (Fasting): 105 mg/dL (Normal: 70-100)
HbA1c: 6.2% (Normal: <5.7%)

COMPLETE BLOOD COUNT:
Hemoglobin: 14.2 g/dL (Normal: 13.5-17.5)
Hematocrit: 42.1% (Normal: 41-53%)
"""

# Italian panel with ~50 analytes; a complete extraction is "comprehensive"
SAMPLE_COMPREHENSIVE_LAB_TEXT = """
COMPREHENSIVE METABOLIC PANEL
Patient: Test Patient
Date: 2024-01-15
Lab: HealthLab Inc.

EMOCROMO COMPLETO:
Leucociti: 5.73 G/l (4.4-11)
Eritrociti: 5.4 T/l (4.2-5.6)
Hemoglobin: 16.2 g/dl (13-17.5)
Hematocrit: 48 % (41-50)
Volume corpusculare medio (MCV): 90 fl (80-97)
Contenuto Hb medio (MCH): 30.3 pg (25-33.3)
Concentrazione Hb corp. media (MCHC): 33.5 g/dl (32-36)
Distribuzione Volume Eritrocitario (RDW): 13.9 % (11-15.5)
Piastrine: 212 10(9)/l (150-450)
Volume medio Piastrine (MPV): 11.5 fl (9.04-12.79)

FORMULA LEUCOCITARIA:
Neutrofili: 42.7 % (40-78)
Linfociti: 41 % (19-49.9)
Monociti: 7.04 % (2-10.5)
Eosinofili: 8.2 % (0-7)
Basofili: 1.1 % (0-2)
Neutrofili Assoluto: 2.44 G/l (1.8-7.8)
Linfociti Assoluto: 2.35 G/l (1.1-4.8)
Monociti Assoluto: 0.4 G/l (0.2-1)
Eosinofili Assoluto: 0.47 G/l (0-0.5)
Basofili Assoluto: 0.06 G/l (0-0.2)

COAGULAZIONE:
Tempo di Protrombina: 55 % (71-118)
INR: 1.34
Tempo di Tromboplastina Parziale (APTT): 32.9 sec (23.9-37)
Tempo di Tromboplastina Parziale Ratio: 1.08
Fibrinogeno: 238 mg/dl (193-412)

CHIMICA CLINICA:
Glucosio: 86 mg/dl (65-100)
Emoglobina Glicata: 5.4 % (4-5.6)
Emoglobina Glicata: 35 mmol/mol (20-38)
Colesterolo Totale: 124 mg/dl (<200)
Colesterolo HDL: 59 mg/dl (>35)
Colesterolo LDL: 60 mg/dl (<100)
Trigliceridi: 35 mg/dl (<150)
Omocisteina: 7.7 μmol/l (4-15)

ENZIMI:
LDH - Latticodeidrogenasi: 202 U/l (135-225)
Creatinchinasi (CK): 146 U/l (<190)
Transaminasi GOT: 28 U/l (<40)
Transaminasi GPT: 40 U/l (<41)
Gamma GT: 11 U/l (<60)

ORMONI TIROIDEI:
TSH: 2.5 μUI/ml (0.27-4.2)
FT3: 3.17 pg/ml (2-4.4)
FT4: 13.8 pg/ml (9.3-17)
Anticorpi Tireoglobulina: 22 UI/ml (<115)
Anti TPO (Microsomiali): 11.3 UI/ml (<34)

ORMONI SESSUALI:
FSH: 2.4 mUI/ml (1.5-12.4)
17 Beta Estradiolo: 20.417 pg/ml (11.3-43.2)
LH: 3.8 mUI/ml (1.7-8.6)
Progesterone: 0.31 ng/ml (0.05-0.15)
Testosterone: 5.44 ng/ml (2.49-8.36)
Cortisolo: 17.9 μg/dl (4.82-19.5)
Prolattina: 13.6 ng/ml (4.04-15.2)
Deidroepiandrosterone Solfato (DHEA-S): 168 μg/dl (211-492)
Androstenedione Delta 4: 1.18 ng/ml (0.5-3.25)
ACTH: 14.2 pg/ml (<60)
"""
