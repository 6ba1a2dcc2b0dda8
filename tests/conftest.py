"""Shared fixtures: a sample medicine document that conforms to the bundled schema."""

import pytest

from pharmacopoeia.infrastructure.settings import BUNDLED_SCHEMA_PATH


SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<medicins>
    <antibiotic name="Amoxicillin" cas="26787-78-0" drug-bank="DB01060" recipe="true">
        <pharm>Penicillin-class antibacterial</pharm>
        <version trade-name="Amoxil">
            <producer>GlaxoSmithKline</producer>
            <form>capsules</form>
            <certificate>
                <registeredBy>FDA</registeredBy>
                <registrationDate>2015-03-01</registrationDate>
                <expireDate>2025-03-01</expireDate>
            </certificate>
            <pack size="10">
                <quantity>3</quantity>
                <price>9.99</price>
            </pack>
            <pack size="20">
                <quantity>1</quantity>
                <price>17.50</price>
            </pack>
            <dosage>
                <amount>500mg</amount>
                <frequency>every 8 hours</frequency>
            </dosage>
        </version>
        <version trade-name="Flemoxin">
            <producer>Astellas</producer>
            <form>tablets</form>
            <certificate>
                <registeredBy>EMA</registeredBy>
                <registrationDate>2018-06-12</registrationDate>
                <expireDate>2028-06-12</expireDate>
            </certificate>
            <pack>
                <quantity>2</quantity>
                <price>6.40</price>
            </pack>
            <dosage>
                <amount>250mg</amount>
                <frequency>every 12 hours</frequency>
            </dosage>
        </version>
    </antibiotic>
    <vitamin name="Cholecalciferol" cas="67-97-0" solution="oil">
        <pharm>Vitamin D3 supplement</pharm>
        <version trade-name="Vigantol">
            <producer>Merck</producer>
            <form>drops</form>
            <certificate>
                <registeredBy>BfArM</registeredBy>
                <registrationDate>2012-01-20</registrationDate>
                <expireDate>2027-01-20</expireDate>
            </certificate>
            <pack size="10ml">
                <quantity>1</quantity>
                <price>4.25</price>
            </pack>
            <dosage>
                <amount>1 drop</amount>
                <frequency>daily</frequency>
            </dosage>
        </version>
    </vitamin>
    <analgetic name="Morphine" cas="57-27-2" drug-bank="DB00295" narcotic="true">
        <pharm>Opioid analgesic</pharm>
        <version trade-name="MS Contin">
            <producer>Purdue Pharma</producer>
            <form>extended-release tablets</form>
            <certificate>
                <registeredBy>FDA</registeredBy>
                <registrationDate>2010-09-30</registrationDate>
                <expireDate>2030-09-30</expireDate>
            </certificate>
            <pack size="30">
                <quantity>1</quantity>
                <price>120.00</price>
            </pack>
            <dosage>
                <amount>15mg</amount>
                <frequency>every 12 hours</frequency>
            </dosage>
        </version>
    </analgetic>
</medicins>
"""


@pytest.fixture
def sample_xml():
    """Sample medicine document as text."""
    return SAMPLE_XML


@pytest.fixture
def sample_file(tmp_path):
    """Sample medicine document written to a temporary file."""
    test_file = tmp_path / "medicins.xml"
    test_file.write_text(SAMPLE_XML, encoding="utf-8")
    return test_file


@pytest.fixture
def schema_path():
    """Path to the bundled XSD."""
    return BUNDLED_SCHEMA_PATH
