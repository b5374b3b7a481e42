# ============================================================================
# src/lab_ingestion/constants/analyte_aliases.py
# ============================================================================
"""
Analyte name aliases (lower-cased variation -> canonical name).

Best-effort table: abbreviations, common report spellings and the Italian
labels seen on European lab reports. Names missing from the table are kept
as printed.
"""

ANALYTE_ALIASES = {
    # Lipid Panel
    "ldl-c": "LDL",
    "ldl": "LDL",
    "ldl cholesterol": "LDL",
    "cholesterol, ldl": "LDL",
    "colesterolo ldl": "LDL",
    "hdl-c": "HDL",
    "hdl": "HDL",
    "hdl cholesterol": "HDL",
    "cholesterol, hdl": "HDL",
    "colesterolo hdl": "HDL",
    "cholesterol": "Total Cholesterol",
    "total cholesterol": "Total Cholesterol",
    "cholesterol, total": "Total Cholesterol",
    "colesterolo totale": "Total Cholesterol",
    "triglycerides": "Triglycerides",
    "trig": "Triglycerides",
    "trigliceridi": "Triglycerides",

    # Glycemic
    "glycated hemoglobin": "HbA1c",
    "hemoglobin a1c": "HbA1c",
    "hba1c": "HbA1c",
    "a1c": "HbA1c",
    "emoglobina glicata": "HbA1c",
    "glucose (fasting)": "Glucose",
    "fasting glucose": "Glucose",
    "glucose": "Glucose",
    "glucosio": "Glucose",
    "glicemia": "Glucose",

    # Complete Blood Count
    "hb": "Hemoglobin",
    "hgb": "Hemoglobin",
    "hemoglobin": "Hemoglobin",
    "emoglobina": "Hemoglobin",
    "hct": "Hematocrit",
    "hematocrit": "Hematocrit",
    "ematocrito": "Hematocrit",
    "wbc": "WBC",
    "white blood cells": "WBC",
    "leucociti": "WBC",
    "rbc": "RBC",
    "red blood cells": "RBC",
    "eritrociti": "RBC",
    "plt": "Platelets",
    "platelet": "Platelets",
    "platelets": "Platelets",
    "piastrine": "Platelets",

    # White Blood Cell Differential
    "neutrophils": "Neutrophils",
    "neutrofili": "Neutrophils",
    "lymphocytes": "Lymphocytes",
    "linfociti": "Lymphocytes",
    "monocytes": "Monocytes",
    "monociti": "Monocytes",
    "eosinophils": "Eosinophils",
    "eosinofili": "Eosinophils",
    "basophils": "Basophils",
    "basofili": "Basophils",

    # Metabolic Panel
    "bun": "BUN",
    "blood urea nitrogen": "BUN",
    "creatinine": "Creatinine",
    "creat": "Creatinine",
    "creatinina": "Creatinine",
    "sodium": "Sodium",
    "na": "Sodium",
    "potassium": "Potassium",
    "k": "Potassium",
    "chloride": "Chloride",
    "calcium": "Calcium",
    "alkaline phosphatase": "Alkaline Phosphatase",
    "alp": "Alkaline Phosphatase",
    "ast": "AST",
    "sgot": "AST",
    "transaminasi got": "AST",
    "alt": "ALT",
    "sgpt": "ALT",
    "transaminasi gpt": "ALT",
    "gamma gt": "GGT",
    "ggt": "GGT",

    # Thyroid
    "tsh": "TSH",
    "free t4": "Free T4",
    "ft4": "Free T4",
    "free t3": "Free T3",
    "ft3": "Free T3",

    # Other
    "crp": "CRP",
    "c-reactive protein": "CRP",
    "ferritin": "Ferritin",
    "ferritina": "Ferritin",
    "vitamin d": "Vitamin D",
    "25-oh vitamin d": "Vitamin D",
    "vitamin b12": "Vitamin B12",
    "omocisteina": "Homocysteine",
    "homocysteine": "Homocysteine",
    "fibrinogeno": "Fibrinogen",
    "cortisolo": "Cortisol",
    "prolattina": "Prolactin",
}
